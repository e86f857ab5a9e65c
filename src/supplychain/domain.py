"""Supply-chain bounded context — agency drafts, agency orders and dispatch.

Agencies collect draft line items and promote them into orders, the head
office approves orders, and logistics companies dispatch them with a driver
until delivery. All three roles work on the same AgencyOrder aggregate.
"""

from protean.domain import Domain

from supplychain.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
supplychain = Domain(name="supplychain")
