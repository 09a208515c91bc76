from __future__ import annotations

import pytest

from business_papers.models import CalculationLineType
from business_papers.schemas import CalculationLine, DocumentSnapshot, ServiceItem


def make_line(line_type: str, value: float, order: int = 0, label: str | None = None, line_id: str | None = None):
    return CalculationLine(
        id=line_id or f"{line_type}-{order}",
        type=CalculationLineType(line_type),
        label=label or line_type.replace("_", " ").title(),
        value=value,
        order=order,
    )


@pytest.fixture
def line():
    return make_line


@pytest.fixture
def snapshot_factory():
    def build(subtotal: float = 1000.0, **overrides) -> DocumentSnapshot:
        data = {
            "document_type_id": "invoice",
            "client_name": "Sarl Atlas",
            "services": [ServiceItem(id="s1", description="Design", quantity=1, rate=subtotal)],
        }
        data.update(overrides)
        return DocumentSnapshot(**data)

    return build
