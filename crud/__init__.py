from .inventory import create_inventory_item, get_inventory_item, get_inventory_items, update_inventory_item, delete_inventory_item
from .customer import create_customer, get_customer, get_customers, update_customer, delete_customer
from .rental import create_rental, get_rental, get_rentals, update_rental, return_rental, delete_rental
