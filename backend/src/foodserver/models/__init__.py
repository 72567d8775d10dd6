from .meals import Meal, MealPayload, MealRating, Summary

__all__ = ["Meal", "MealPayload", "MealRating", "Summary"]
