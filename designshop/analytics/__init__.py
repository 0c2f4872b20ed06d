"""
Module Analytics - Tableau de bord admin
"""
