from analytics.aggregator import aggregate_by_month, portfolio_to_frame
from analytics.categorizer import categorize, categorize_transactions, detect_vice_category, rank
from analytics.dca_engine import simulate, simulate_ghost_portfolio, simulate_potential_portfolio
from analytics.scheduler import is_scheduled_date
