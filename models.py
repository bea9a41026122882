from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


class StorageSlot(db.Model):
    __tablename__ = 'storage_slots'
    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())
