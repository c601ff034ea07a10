# -*- coding: utf-8 -*-
"""NutriPlan meal-suggestion backend."""
