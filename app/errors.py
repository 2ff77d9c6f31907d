class PeopleDBError(Exception):
    """base exception for people database errors"""
    pass


class PersonInputError(PeopleDBError):
    """
    raised when name/age input fails validation

    carries the toast title/description shown to the user and the
    names of the offending fields
    """

    def __init__(self, description: str, fields: tuple[str, ...], title: str = "Error"):
        super().__init__(description)
        self.title = title
        self.description = description
        self.fields = fields
