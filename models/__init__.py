from .inventory import InventoryItem
from .customer import Customer
from .rental import Rental, RentalStatus
from .site_config import SiteConfigEntry
