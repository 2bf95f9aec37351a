import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from coursetrack.config.settings import Settings, get_settings


# ==================================
# 🟢 MongoDB
# ==================================
def create_mongo_client(settings: Optional[Settings] = None) -> MongoClient:
    """Crea el cliente de Mongo (thread-safe, con pool; se comparte en todo el proceso)."""
    settings = settings or get_settings()
    # connect=False: no abre sockets hasta la primera operación
    return MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms, connect=False)


def get_mongo_db(client: MongoClient, settings: Optional[Settings] = None) -> Database:
    settings = settings or get_settings()
    return client[settings.mongo_database]


def probar_mongo(db: Database) -> bool:
    """Hace ping a la base; loguea el resultado sin cortar el arranque."""
    try:
        db.client.admin.command("ping")
        logging.info(f"🟢 Mongo conectado a la base: {db.name}")
        return True
    except PyMongoError as e:
        logging.error(f"❌ Error al conectar a MongoDB: {e}")
        return False
