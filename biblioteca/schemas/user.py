from marshmallow import Schema, fields


class UserSchema(Schema):
    id = fields.UUID()
    email = fields.Email()
    name = fields.Str()
    role = fields.Str()
    created_at = fields.DateTime()
