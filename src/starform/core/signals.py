class SignalDescriptor:
    """Return `$Namespace.field` for Datastar expressions.

    Class access uses the class-level namespace, instance access uses the
    namespace the view instance was configured with.
    """

    def __init__(self, field_name: str, expression: bool = True) -> None:
        self.field_name = field_name
        self.expression = expression

    def __get__(self, instance, owner):
        #  class access  →  owner is the view class, instance is None
        if instance is None:
            ns = getattr(owner, "default_namespace", owner.__name__)
        else:
            ns = instance.namespace
        path = f"{ns}.{self.field_name}" if ns else self.field_name
        return f"${path}" if self.expression else path
