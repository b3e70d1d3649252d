"""Account domain constants.

Role labels a user can be granted.  A user may hold several of them at
once (a consumer who also runs a vendor shop, for instance).
"""

from django.db import models


class Role(models.TextChoices):
    CONSUMER = "consumer", "Consumer"
    VENDOR = "vendor", "Vendor"
    SHOPPER = "shopper", "Shopper"
    ADMIN = "admin", "Admin"
