"""
"Get Involved" contact form.
Validates the JSON body posted to /api/contact before it reaches the store.
"""

from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length

from . import payload_formdata

FIELD_ALIASES = {
    "first_name": ("firstName", "first_name"),
    "last_name": ("lastName", "last_name"),
    "email": ("email",),
    "interest": ("interest",),
    "message": ("message",),
}


class ContactForm(FlaskForm):
    class Meta:
        csrf = False

    first_name = StringField(
        "First name",
        validators=[DataRequired(message="First name is required"), Length(max=120)],
    )
    last_name = StringField(
        "Last name",
        validators=[DataRequired(message="Last name is required"), Length(max=120)],
    )
    email = StringField(
        "Email",
        validators=[
            DataRequired(message="Please enter a valid email address"),
            Email(message="Please enter a valid email address"),
        ],
    )
    interest = StringField(
        "I'm interested in",
        validators=[DataRequired(message="Please select an interest"), Length(max=60)],
    )
    message = TextAreaField(
        "Message",
        validators=[
            DataRequired(message="Message must be at least 10 characters"),
            Length(min=10, max=5000, message="Message must be at least 10 characters"),
        ],
    )

    @classmethod
    def from_payload(cls, payload: dict) -> "ContactForm":
        return cls(formdata=payload_formdata(payload, FIELD_ALIASES))

    def cleaned(self) -> dict:
        return {
            "first_name": self.first_name.data.strip(),
            "last_name": self.last_name.data.strip(),
            "email": self.email.data.strip().lower(),
            "interest": self.interest.data.strip(),
            "message": self.message.data.strip(),
        }
