# -*- coding: utf-8 -*-
"""Meals domain: AI meal suggestions with static fallbacks."""
