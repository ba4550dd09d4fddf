from .phone_update import PhoneUpdateOperation, AutomationFailed

__all__ = ["PhoneUpdateOperation", "AutomationFailed"]
