from django.db import models
from django.utils.translation import gettext_lazy as _

class UserTypeEnums(models.IntegerChoices):
    ADMIN = 0, _("Admin")
    TRADER = 1, _("Trader")
    USER = 3, _("User")

    @classmethod
    def is_valid(cls, value) -> bool:
        return value in cls.values
