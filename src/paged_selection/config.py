"""SessionConfig: user-tunable settings for a table session."""

from __future__ import annotations

import param


class SessionConfig(param.Parameterized):
    """Settings shared by the pagination and selection layers."""

    page_size = param.Integer(default=10, bounds=(1, None), doc="Items per page")
    key_field = param.String(
        default="title",
        doc="Item field (mapping key or attribute) holding the unique key",
    )
    busy_policy = param.Selector(
        default="queue",
        objects=["queue", "reject"],
        doc="Queue or reject an operation issued while another is in flight",
    )
