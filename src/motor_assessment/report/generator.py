"""
Session Report Generator
========================

Render a completed (or partial) assessment session as Markdown.
Uses Jinja2 templates for flexible output formats.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..analysis.scoring import SessionSummary
from ..core.types import Hand


class SessionReportGenerator:
    """Generate session reports from templates."""

    def __init__(self, template_dir: str | Path | None = None):
        self.template_dir = Path(template_dir) if template_dir is not None else None

        if self.template_dir is not None and self.template_dir.exists():
            self.env = Environment(
                loader=FileSystemLoader(str(self.template_dir)),
                autoescape=select_autoescape(["html", "xml"]),
            )
        else:
            self.env = Environment(autoescape=select_autoescape(["html", "xml"]))

        self.env.filters["format_number"] = self._format_number
        self.env.filters["format_date"] = self._format_date
        self.env.filters["yes_no"] = self._yes_no

    @staticmethod
    def _format_number(value: float | None, decimals: int = 2) -> str:
        """Format number with specified decimals."""
        if value is None:
            return "-"
        if isinstance(value, (int, float)):
            return f"{value:.{decimals}f}"
        return str(value)

    @staticmethod
    def _format_date(value: datetime, fmt: str = "%Y-%m-%d") -> str:
        """Format datetime."""
        if isinstance(value, datetime):
            return value.strftime(fmt)
        return str(value)

    @staticmethod
    def _yes_no(value: bool | None) -> str:
        if value is None:
            return "-"
        return "Yes" if value else "No"

    def render_template(self, template_name: str, context: dict[str, Any]) -> str:
        """Render a template file with context."""
        template = self.env.get_template(template_name)
        return template.render(**context)

    def render_string(self, template_str: str, context: dict[str, Any]) -> str:
        """Render a template string with context."""
        template = self.env.from_string(template_str)
        return template.render(**context)

    def generate(
        self,
        summary: SessionSummary,
        output_path: str | Path | None = None,
        template: str | None = None,
        title: str = "Hand Motor Assessment",
        template_name: str | None = None,
    ) -> str:
        """
        Generate a session report.

        Args:
            summary: Session summary to render
            output_path: Optional path to save report
            template: Template string; defaults to the built-in Markdown layout
            title: Report heading
            template_name: Template file in the template directory, used instead
                of the template string

        Returns:
            Rendered report string
        """
        record = summary.record
        context = {
            "title": title,
            "summary": summary,
            "hands": [
                {
                    "name": hand.value,
                    "tapping": record.tapping(hand),
                    "tremor": record.tremor(hand),
                    "assessment": summary.hand_assessments.get(hand),
                }
                for hand in (Hand.LEFT, Hand.RIGHT)
            ],
            "generated_at": datetime.now(),
        }

        if template_name is not None:
            content = self.render_template(template_name, context)
        else:
            content = self.render_string(template or SESSION_REPORT_TEMPLATE, context)

        if output_path:
            path = Path(output_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

        return content


SESSION_REPORT_TEMPLATE = """# {{ title }}

**Overall status:** {{ summary.overall_status.value }}
**Dominant hand:** {{ summary.dominant_hand }}{% if summary.dominance_confidence is not none %} (confidence {{ summary.dominance_confidence | format_number(0) }}%){% endif %}
**Average tapping score:** {{ summary.average_tapping_score | format_number(1) }}
**Tremor detected:** {{ summary.any_tremor | yes_no }}

{% for hand in hands %}
## {{ hand.name }} Hand

{% if hand.tapping %}
### Finger Tapping

- **Taps:** {{ hand.tapping.tap_count }} in {{ hand.tapping.duration | format_number(1) }} s
- **Average frequency:** {{ hand.tapping.average_frequency | format_number }} Hz
- **Peak frequency:** {{ hand.tapping.peak_frequency | format_number }} Hz
- **Consistency:** {{ hand.tapping.consistency | format_number }}
- **Fatigue index:** {{ hand.tapping.fatigue_index | format_number }}
- **Rhythmicity:** {{ hand.tapping.rhythmicity | format_number(0) }}/100
- **Score:** {{ hand.tapping.score | format_number(0) }}/100 ({{ hand.tapping.grade.value }})
{% else %}
*Tapping phase not completed.*
{% endif %}

{% if hand.tremor %}
### Resting Tremor

- **Samples:** {{ hand.tremor.sample_count }} ({{ hand.tremor.data_quality }} quality)
- **Frequency:** {{ hand.tremor.frequency | format_number }} Hz ({{ hand.tremor.tremor_type.value }})
- **Amplitude:** {{ hand.tremor.amplitude | format_number(4) }} (max {{ hand.tremor.max_amplitude | format_number(4) }})
- **Dominant axis:** {{ hand.tremor.dominant_axis.value }}
- **Gyro stability:** {{ hand.tremor.gyro_stability | format_number(0) }}/100
- **Severity:** {{ hand.tremor.severity.value }}
{% else %}
*Tremor phase not completed.*
{% endif %}

{% if hand.assessment %}
**Hand score:** {{ hand.assessment.score | format_number(0) }}/100 ({{ hand.assessment.category.value }})
{{ hand.assessment.interpretation }}
{% endif %}

{% endfor %}
{% if summary.bilateral %}
## Bilateral Comparison

| Metric | Difference | Asymmetry |
|--------|------------|-----------|
| Tapping frequency (Hz) | {{ summary.bilateral.tapping_frequency_difference | format_number }} | {{ summary.bilateral.tapping_asymmetry | yes_no }} |
| Tremor amplitude | {{ summary.bilateral.tremor_amplitude_difference | format_number(4) }} | {{ summary.bilateral.amplitude_asymmetry | yes_no }} |
| Tremor frequency (Hz) | {{ summary.bilateral.tremor_frequency_difference | format_number }} | - |
| Gyro stability | {{ summary.bilateral.stability_difference | format_number(1) }} | - |
{% endif %}

## Recommendations

{% for item in summary.recommendations %}
- {{ item }}
{% endfor %}

---
*Screening aid only, not a diagnosis. Generated on {{ generated_at | format_date("%Y-%m-%d %H:%M") }}*
"""


def generate_session_report(
    summary: SessionSummary,
    output_path: str | Path | None = None,
    template_path: str | Path | None = None,
) -> str:
    """
    Convenience function to generate a session report.

    Args:
        summary: Session summary to render
        output_path: Optional output file path
        template_path: Optional Jinja2 template file replacing the built-in layout

    Returns:
        Rendered report string
    """
    if template_path is None:
        return SessionReportGenerator().generate(summary, output_path)

    template_path = Path(template_path)
    generator = SessionReportGenerator(template_path.parent)
    return generator.generate(summary, output_path, template_name=template_path.name)
