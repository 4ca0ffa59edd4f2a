"""Services package for DECOPEINT Gestion."""

__all__ = [
    'DatabaseService',
    'ServiceService',
    'ClientService',
    'FournisseurService',
    'FactureService',
    'ExportService',
    'AuthService',
    'DashboardService',
]
