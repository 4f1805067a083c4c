from .rentals import ActiveRental, SettledRental, Rental, LineItem, from_record, from_records
from .availability import compute_active_reservations, available_count, items_with_history
from .pricing import estimate_live_price, settle_rental, revise_rental, rate_table, is_overdue
