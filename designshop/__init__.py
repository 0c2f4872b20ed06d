"""
Design Shop API : commandes de design personnalisé, tarification par palier et tableau de bord admin.
"""
