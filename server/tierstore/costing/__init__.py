from tierstore.costing.service import CostCalculator

__all__ = ["CostCalculator"]
