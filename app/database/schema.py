"""
Schéma de base de données pour DECOPEINT Gestion.
Deux variantes : SQLite (fichier local) et MySQL (serveur).
"""

SCHEMA_SQL = """
-- ============================================================================
-- UTILISATEURS
-- ============================================================================

CREATE TABLE IF NOT EXISTS utilisateurs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    login TEXT UNIQUE NOT NULL,
    mot_de_passe TEXT NOT NULL,
    nom TEXT,
    actif BOOLEAN DEFAULT 1,
    date_creation TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- ============================================================================
-- CLIENTS ET FOURNISSEURS
-- ============================================================================

CREATE TABLE IF NOT EXISTS client (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nom TEXT NOT NULL,
    telephone TEXT,
    email TEXT,
    adresse TEXT,
    date_creation TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS fournisseur (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nom TEXT NOT NULL,
    telephone TEXT,
    email TEXT,
    adresse TEXT,
    date_creation TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- ============================================================================
-- SERVICES VENDUS ET PAIEMENTS
-- ============================================================================

CREATE TABLE IF NOT EXISTS type_service (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    nom_type TEXT UNIQUE NOT NULL
);

CREATE TABLE IF NOT EXISTS service (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    id_client INTEGER NOT NULL,
    id_type_service INTEGER NOT NULL,
    description TEXT,
    prix_total REAL NOT NULL CHECK(prix_total >= 0),
    montant_paye REAL NOT NULL DEFAULT 0,
    reste_a_payer REAL NOT NULL DEFAULT 0,
    etat_paiement TEXT DEFAULT 'NON_PAYE'
        CHECK(etat_paiement IN ('NON_PAYE', 'PARTIELLEMENT_PAYE', 'PAYE')),
    statut_service TEXT DEFAULT 'EN_ATTENTE'
        CHECK(statut_service IN ('EN_ATTENTE', 'EN_COURS', 'TERMINE')),
    date_creation TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (id_client) REFERENCES client(id),
    FOREIGN KEY (id_type_service) REFERENCES type_service(id)
);

-- Journal des paiements : ajout seul, la somme = service.montant_paye
CREATE TABLE IF NOT EXISTS paiement_vente (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    id_service INTEGER NOT NULL,
    montant REAL NOT NULL CHECK(montant > 0),
    mode_paiement TEXT NOT NULL,
    date_paiement TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (id_service) REFERENCES service(id)
);

-- ============================================================================
-- INDEX POUR PERFORMANCES
-- ============================================================================

CREATE INDEX IF NOT EXISTS idx_client_nom ON client(nom);
CREATE INDEX IF NOT EXISTS idx_fournisseur_nom ON fournisseur(nom);
CREATE INDEX IF NOT EXISTS idx_service_client ON service(id_client);
CREATE INDEX IF NOT EXISTS idx_service_type ON service(id_type_service);
CREATE INDEX IF NOT EXISTS idx_service_date ON service(date_creation);
CREATE INDEX IF NOT EXISTS idx_paiement_service ON paiement_vente(id_service);
"""

# MySQL : pas de CREATE INDEX IF NOT EXISTS, les index sont déclarés dans les tables
MYSQL_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS utilisateurs (
    id INT AUTO_INCREMENT PRIMARY KEY,
    login VARCHAR(100) UNIQUE NOT NULL,
    mot_de_passe VARCHAR(255) NOT NULL,
    nom VARCHAR(150),
    actif BOOLEAN DEFAULT TRUE,
    date_creation DATETIME DEFAULT CURRENT_TIMESTAMP
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS client (
    id INT AUTO_INCREMENT PRIMARY KEY,
    nom VARCHAR(150) NOT NULL,
    telephone VARCHAR(50),
    email VARCHAR(150),
    adresse TEXT,
    date_creation DATETIME DEFAULT CURRENT_TIMESTAMP,
    INDEX idx_client_nom (nom)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS fournisseur (
    id INT AUTO_INCREMENT PRIMARY KEY,
    nom VARCHAR(150) NOT NULL,
    telephone VARCHAR(50),
    email VARCHAR(150),
    adresse TEXT,
    date_creation DATETIME DEFAULT CURRENT_TIMESTAMP,
    INDEX idx_fournisseur_nom (nom)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS type_service (
    id INT AUTO_INCREMENT PRIMARY KEY,
    nom_type VARCHAR(150) UNIQUE NOT NULL
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS service (
    id INT AUTO_INCREMENT PRIMARY KEY,
    id_client INT NOT NULL,
    id_type_service INT NOT NULL,
    description TEXT,
    prix_total DECIMAL(12,2) NOT NULL,
    montant_paye DECIMAL(12,2) NOT NULL DEFAULT 0,
    reste_a_payer DECIMAL(12,2) NOT NULL DEFAULT 0,
    etat_paiement ENUM('NON_PAYE', 'PARTIELLEMENT_PAYE', 'PAYE') DEFAULT 'NON_PAYE',
    statut_service ENUM('EN_ATTENTE', 'EN_COURS', 'TERMINE') DEFAULT 'EN_ATTENTE',
    date_creation DATETIME DEFAULT CURRENT_TIMESTAMP,
    INDEX idx_service_date (date_creation),
    FOREIGN KEY (id_client) REFERENCES client(id),
    FOREIGN KEY (id_type_service) REFERENCES type_service(id)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS paiement_vente (
    id INT AUTO_INCREMENT PRIMARY KEY,
    id_service INT NOT NULL,
    montant DECIMAL(12,2) NOT NULL,
    mode_paiement VARCHAR(50) NOT NULL,
    date_paiement DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (id_service) REFERENCES service(id)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
"""


def init_database(conn, engine="sqlite"):
    """Initialise la base de données avec le schéma."""
    cursor = conn.cursor()
    if engine == "mysql":
        for statement in MYSQL_SCHEMA_SQL.split(";"):
            if statement.strip():
                cursor.execute(statement)
    else:
        cursor.executescript(SCHEMA_SQL)
    conn.commit()
    cursor.close()
