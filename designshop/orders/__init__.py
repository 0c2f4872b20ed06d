"""
Module Orders - Cycle de vie, tarification et export des commandes
"""
