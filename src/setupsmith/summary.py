from __future__ import annotations

import jinja2

from .types import ProvisionSummary

SUMMARY_TEMPLATE = """\

--------------------------- Summary ------------------------------------------
 > Hostname changed to: '{{ summary.hostname }}'
 > Package Manager used: '{{ summary.package_manager }}'
 > Installed packages:
{% for outcome in summary.outcomes %}
    - {{ outcome.describe() }}
{% else %}
    (none)
{% endfor %}
------------------------------------------------------------------------------"""

_environment = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    autoescape=False,
    trim_blocks=True,
    keep_trailing_newline=False,
)


def render_summary(summary: ProvisionSummary, template: str = SUMMARY_TEMPLATE) -> str:
    return _environment.from_string(template).render(summary=summary)
