from salonbook import db


class MessageTemplate(db.Model):
    """Salon override of one of the default client message texts"""
    __tablename__ = 'message_templates'

    id = db.Column(db.Integer, primary_key=True)
    salon_id = db.Column(db.Integer, db.ForeignKey('salons.id'), nullable=False)
    kind = db.Column(db.String(30), nullable=False)
    body = db.Column(db.Text, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('salon_id', 'kind', name='uq_message_template_kind'),
    )

    def __init__(self, salon_id, kind, body):
        self.salon_id = salon_id
        self.kind = kind
        self.body = body

    def __repr__(self):
        return f'<MessageTemplate {self.salon_id} {self.kind}>'
