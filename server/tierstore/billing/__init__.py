from tierstore.billing.service import BillingLedger

__all__ = ["BillingLedger"]
