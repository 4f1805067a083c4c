from .inventory import InventoryItem, InventoryItemCreate, InventoryItemUpdate, InventoryItemWithAvailability
from .customer import Customer, CustomerCreate, CustomerUpdate
from .rental import Rental, RentalCreate, RentalUpdate, RentalReturn, LineItem
from .site_config import SiteConfigEntry
from .dashboard import DashboardOverview, RevenuePoint
from .public import Catalog, CatalogItem
