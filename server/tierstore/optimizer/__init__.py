from tierstore.optimizer.service import OptimizationEngine

__all__ = ["OptimizationEngine"]
