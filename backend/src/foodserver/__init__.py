"""FoodServer: meal records with photos, ratings and a summary view."""

__version__ = "0.1.0"
