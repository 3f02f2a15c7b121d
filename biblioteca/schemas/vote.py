from marshmallow import Schema, fields, validate

from ..extensions import ma


class VoteSubmitSchema(Schema):
    option = fields.Str(required=True, validate=validate.Length(min=1, max=200))


class VoteReadSchema(ma.Schema):
    id = fields.UUID()
    poll_id = fields.UUID()
    option = fields.Str()
    created_at = fields.DateTime()


class VoteStatusSchema(Schema):
    has_voted = fields.Bool(required=True)
    vote = fields.Nested(VoteReadSchema, allow_none=True)
