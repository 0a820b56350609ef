from models.db_storage import DBStorage

# configured and reloaded by api.create_app()
storage = DBStorage()
