from django.db import models


# ---------- Hotel ----------
class Hotel(models.Model):
    """Property a journal entry can be tagged with.

    Tagging only: accounts, periods and balances are shared across hotels.
    """

    name = models.CharField(max_length=200)
    # URL-friendly identifier, unique across the installation
    slug = models.SlugField(max_length=80, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name
