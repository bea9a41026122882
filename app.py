import os
import sys

from dotenv import load_dotenv
from flask import Flask
from loguru import logger

from booking_service import BookingService
from booking_store import DEFAULT_STORAGE_KEY, BookingStore
from catalog import TMDB_BASE_URL, CatalogProvider
from models import db
from notifications import DEFAULT_TIMEOUT, NotificationDispatcher
from routes.booking_routes import booking_bp
from routes.movie_routes import movie_bp
from routes.seat_routes import seat_bp
from storage import build_storage

load_dotenv()

try:
    NOTIFICATION_TIMEOUT = float(os.getenv("NOTIFICATION_TIMEOUT", str(DEFAULT_TIMEOUT)))
except ValueError:
    NOTIFICATION_TIMEOUT = DEFAULT_TIMEOUT

logger.remove()
logger.add(sys.stderr, level=os.getenv("LOG_LEVEL", "INFO"))
if os.getenv("LOG_FILE"):
    logger.add(os.getenv("LOG_FILE"), level=os.getenv("LOG_LEVEL", "INFO"), rotation="10 MB")

app = Flask(__name__)
app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL", "sqlite:///bookings.db")
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
app.config["SECRET_KEY"] = os.getenv("SECRET_KEY")
app.config["STORAGE_BACKEND"] = os.getenv("STORAGE_BACKEND", "database")
app.config["BOOKINGS_STORAGE_KEY"] = os.getenv("BOOKINGS_STORAGE_KEY", DEFAULT_STORAGE_KEY)
app.config["ADMIN_WEBHOOK_URL"] = os.getenv("ADMIN_WEBHOOK_URL")
app.config["EMAIL_WEBHOOK_URL"] = os.getenv("EMAIL_WEBHOOK_URL")
app.config["ADMIN_WHATSAPP_NUMBER"] = os.getenv("ADMIN_WHATSAPP_NUMBER", "+919876543210")
app.config["NOTIFICATION_TIMEOUT"] = NOTIFICATION_TIMEOUT
app.config["TMDB_API_KEY"] = os.getenv("TMDB_API_KEY")
app.config["TMDB_BASE_URL"] = os.getenv("TMDB_BASE_URL", TMDB_BASE_URL)
app.config["STRICT_STATUS_TRANSITIONS"] = os.getenv("STRICT_STATUS_TRANSITIONS", "false").lower() in ("1", "true", "yes")

db.init_app(app)

app.register_blueprint(movie_bp)
app.register_blueprint(seat_bp)
app.register_blueprint(booking_bp)

with app.app_context():
    db.create_all()


def init_services(flask_app):
    """(Re)build the store, notifier, catalog and booking service from config."""
    config = flask_app.config
    old_store = flask_app.extensions.get("booking_store")
    if old_store is not None:
        old_store.close()

    store = BookingStore(build_storage(config["STORAGE_BACKEND"]), key=config["BOOKINGS_STORAGE_KEY"]).open()
    notifier = NotificationDispatcher(
        admin_webhook_url=config["ADMIN_WEBHOOK_URL"],
        email_webhook_url=config["EMAIL_WEBHOOK_URL"],
        admin_contact=config["ADMIN_WHATSAPP_NUMBER"],
        timeout=config["NOTIFICATION_TIMEOUT"],
    )
    flask_app.extensions["booking_store"] = store
    flask_app.extensions["notifier"] = notifier
    flask_app.extensions["catalog"] = CatalogProvider(
        api_key=config["TMDB_API_KEY"], base_url=config["TMDB_BASE_URL"]
    )
    flask_app.extensions["booking_service"] = BookingService(
        store, notifier, strict_transitions=config["STRICT_STATUS_TRANSITIONS"]
    )


init_services(app)


@app.route("/")
def index():
    return {"message": "Sheshnag Cinema booking API running"}


if __name__ == '__main__':
    app.run(debug=True)
