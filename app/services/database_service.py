"""
Service de gestion de la base de données (MySQL ou SQLite).
Une seule connexion, partagée par toute l'application.
"""
import sqlite3
import logging
import traceback
from contextlib import contextmanager
from pathlib import Path

import mysql.connector

from config import settings
from app.database.schema import init_database

logger = logging.getLogger(__name__)


def row_to_dict(row):
    '''Convertit sqlite3.Row (ou dict MySQL) en dict.'''
    if row is None:
        return None
    if hasattr(row, 'keys'):
        return {key: row[key] for key in row.keys()}
    return row


class Transaction:
    """Curseur d'une transaction en cours (voir DatabaseService.transaction)."""

    def __init__(self, db, cursor):
        self.db = db
        self.cursor = cursor

    def execute(self, query, params=None):
        self.cursor.execute(self.db._prepare(query), tuple(params or ()))
        return self.cursor

    def fetch_one(self, query, params=None):
        return row_to_dict(self.execute(query, params).fetchone())

    def insert(self, table, data):
        columns = ', '.join(data.keys())
        placeholders = ', '.join(['?' for _ in data])
        query = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        return self.execute(query, tuple(data.values())).lastrowid


class DatabaseService:
    """Service singleton pour gérer la connexion à la base de données."""

    _instance = None
    _connection = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not getattr(self, '_configured', False):
            self.configure()

    def configure(self, engine=None, database_path=None):
        """
        Choisit le moteur (mysql/sqlite) et ferme la connexion courante.
        La connexion suivante est ouverte à la demande.
        """
        self.close()
        self.engine = engine or settings.DB_ENGINE
        self.database_path = Path(database_path) if database_path else settings.DATABASE_PATH
        self._configured = True

    def _connect(self):
        """Établit la connexion à la base de données."""
        try:
            if self.engine == 'mysql':
                self._connection = mysql.connector.connect(
                    host=settings.DB_HOST,
                    port=settings.DB_PORT,
                    user=settings.DB_USER,
                    password=settings.DB_PASSWORD,
                    database=settings.DB_NAME,
                    charset='utf8mb4',
                    autocommit=True,
                )
                cible = f"mysql://{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
            else:
                self.database_path.parent.mkdir(parents=True, exist_ok=True)
                self._connection = sqlite3.connect(
                    str(self.database_path),
                    check_same_thread=False
                )
                self._connection.row_factory = sqlite3.Row
                self._connection.execute("PRAGMA foreign_keys = ON")
                cible = str(self.database_path)

            init_database(self._connection, self.engine)
            logger.info(f"Base de données connectée: {cible}")
        except Exception as e:
            self._connection = None
            logger.error(f"Erreur connexion base de données: {e}")
            raise

    def get_connection(self):
        """Retourne la connexion, rouverte si elle a été perdue."""
        if self._connection is None:
            self._connect()
        elif self.engine == 'mysql' and not self._connection.is_connected():
            logger.warning("Connexion MySQL perdue, reconnexion")
            self._connect()
        return self._connection

    def _cursor(self, conn):
        if self.engine == 'mysql':
            return conn.cursor(dictionary=True, buffered=True)
        return conn.cursor()

    def _prepare(self, query):
        """Les requêtes sont écrites avec '?' ; MySQL attend '%s'."""
        if self.engine == 'mysql':
            return query.replace('?', '%s')
        return query

    def _log_sql_error(self, method, e, query, params):
        logger.error(
            "ERREUR {}: {}\nQUERY: {}\nPARAMS: {}\n{}".format(
                method, e, query[:500], params, traceback.format_exc()
            )
        )

    def execute(self, query, params=None):
        """Exécute une requête SQL et valide immédiatement."""
        conn = self.get_connection()
        cursor = self._cursor(conn)
        try:
            cursor.execute(self._prepare(query), tuple(params or ()))
            conn.commit()
            return cursor
        except Exception as e:
            conn.rollback()
            self._log_sql_error("execute", e, query, params)
            raise

    def fetch_one(self, query, params=None):
        """Exécute une requête et retourne une ligne (dict) ou None."""
        try:
            cursor = self._cursor(self.get_connection())
            cursor.execute(self._prepare(query), tuple(params or ()))
            return row_to_dict(cursor.fetchone())
        except Exception as e:
            self._log_sql_error("fetch_one", e, query, params)
            raise

    def fetch_all(self, query, params=None):
        """Exécute une requête et retourne toutes les lignes (dicts)."""
        try:
            cursor = self._cursor(self.get_connection())
            cursor.execute(self._prepare(query), tuple(params or ()))
            return [row_to_dict(row) for row in cursor.fetchall()]
        except Exception as e:
            self._log_sql_error("fetch_all", e, query, params)
            raise

    def insert(self, table, data):
        """Insert data into a table."""
        columns = ', '.join(data.keys())
        placeholders = ', '.join(['?' for _ in data])
        query = f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"
        cursor = self.execute(query, tuple(data.values()))
        return cursor.lastrowid

    def update(self, table, data, where_clause, where_params):
        """Update data in a table."""
        set_clause = ', '.join([f"{k} = ?" for k in data.keys()])
        query = f"UPDATE {table} SET {set_clause} WHERE {where_clause}"
        params = tuple(data.values()) + tuple(where_params)
        return self.execute(query, params).rowcount

    def delete(self, table, where_clause, where_params):
        """Delete data from a table."""
        query = f"DELETE FROM {table} WHERE {where_clause}"
        return self.execute(query, where_params).rowcount

    @contextmanager
    def transaction(self):
        """
        Regroupe plusieurs écritures : commit à la sortie du bloc,
        rollback puis propagation de l'exception en cas d'erreur.

            with db_service.transaction() as tx:
                service_id = tx.insert('service', {...})
                tx.insert('paiement_vente', {...})
        """
        conn = self.get_connection()
        if self.engine == 'mysql':
            conn.start_transaction()
        tx = Transaction(self, self._cursor(conn))
        try:
            yield tx
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Transaction annulée: {e}")
            raise
        finally:
            tx.cursor.close()

    def close(self):
        """Ferme la connexion à la base de données."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.info("Connexion base de données fermée")

# Instance globale
db_service = DatabaseService()
