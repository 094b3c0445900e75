import uuid
from datetime import datetime
from flask_sqlalchemy import SQLAlchemy

from tournament_core.domain import FinalResult

db = SQLAlchemy()


def generate_tournament_id() -> str:
    return str(uuid.uuid4())


class Tournament(db.Model):
    __tablename__ = 'tournaments'
    
    id = db.Column(db.String(36), primary_key=True, default=generate_tournament_id)
    customer_id = db.Column(db.String(64), nullable=False, index=True)
    
    tournament_name = db.Column(db.String(200), nullable=False)
    tournament_date = db.Column(db.String(32), nullable=False, index=True)  # ISO date
    format = db.Column(db.String(100), nullable=True)
    tournament_type = db.Column(db.String(100), nullable=True)
    result = db.Column(db.String(20), nullable=False, default=FinalResult.UNTOPPED.value)
    
    # Derived: score is always recomputed from rounds
    rounds = db.Column(db.JSON, nullable=False, default=list)
    score = db.Column(db.JSON, nullable=False, default=dict)
    
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def to_dict(self):
        return {
            'id': self.id,
            'customer_id': self.customer_id,
            'tournament_name': self.tournament_name,
            'tournament_date': self.tournament_date,
            'format': self.format,
            'tournament_type': self.tournament_type,
            'result': self.result,
            'rounds': self.rounds or [],
            'score': self.score or {},
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
