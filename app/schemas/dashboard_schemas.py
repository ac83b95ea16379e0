from pydantic import BaseModel


class DashboardStats(BaseModel):
    """Aggregated figures for the caller's tenant"""

    total_taxis: int
    active_drivers: int
    pending_reports: int
    total_revenue: float
    total_expenses: float
    net_revenue: float
