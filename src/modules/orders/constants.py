"""Order domain constants."""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class OversellPolicy(models.TextChoices):
    """What happens when an order line asks for more than is in stock."""

    REJECT = "reject", "Reject the operation"
    ALLOW = "allow", "Let stock go negative"


ORDER_NUMBER_MAX_RETRIES = 5

# Largest value an IntegerField column holds on every supported backend.
MAX_LINE_QUANTITY = 2_147_483_647
