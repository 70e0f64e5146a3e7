__version__ = "1.0.0"
__description__ = "jsonapi-handler : JSON:API request handlers for Flask and SQLAlchemy"
