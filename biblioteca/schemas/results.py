from marshmallow import Schema, fields


class OptionResultSchema(Schema):
    option = fields.Str(required=True)
    votes = fields.Int(required=True)
    percentage = fields.Float(required=True)


class PollResultsSchema(Schema):
    poll_id = fields.UUID(required=True)
    state = fields.Str(required=True)
    total_votes = fields.Int(required=True)
    results = fields.List(fields.Nested(OptionResultSchema), required=True)
