"""
Customer resolution for checkout.
"""

import logging

from .models import Customer

logger = logging.getLogger(__name__)


def resolve_customer(name, phone):
    """
    Find the customer with ``phone`` or create one.

    An existing customer whose stored name differs gets the new name (last
    write wins). Safe to call inside the checkout transaction: when two
    checkouts create the same new number at once, ``get_or_create`` rolls
    its insert back to a savepoint and returns the row that won.

    Returns:
        tuple: (customer, created)
    """
    name = name.strip()
    phone = phone.strip()

    customer, created = Customer.objects.get_or_create(phone=phone, defaults={"name": name})

    if created:
        logger.info(f"New customer created: {name} ({phone})")
    elif customer.name != name:
        logger.info(f'Customer {phone} renamed from "{customer.name}" to "{name}"')
        customer.name = name
        customer.save(update_fields=["name", "updated_at"])

    return customer, created
