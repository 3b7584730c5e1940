from decimal import Decimal

from booking_core.domain.entities.service import Service

DEFAULT_SERVICES: list[Service] = [
    Service(id=1, name="Haircut", duration_minutes=30, price=Decimal("35.00"), description="Wash, cut and style"),
    Service(id=2, name="Deep Tissue Massage", duration_minutes=60, price=Decimal("100.00")),
    Service(id=3, name="Facial", duration_minutes=45, price=Decimal("80.00"), description="Cleansing facial"),
    Service(id=4, name="Manicure", duration_minutes=40, price=Decimal("30.00")),
    Service(id=5, name="Hair Coloring", duration_minutes=120, price=Decimal("150.00"), active=False),
]
