class EcsLocalError(Exception):
    pass


class IdentityError(EcsLocalError):
    pass


class ControlPlaneError(EcsLocalError):
    pass


class RegistryAuthError(EcsLocalError):
    pass


class ImagePullError(EcsLocalError):
    pass


class RuntimeLaunchError(EcsLocalError):
    pass


class RoleAssumptionError(EcsLocalError):
    pass


class InvalidInvocationError(EcsLocalError, ValueError):
    pass


class ConfigurationError(EcsLocalError):
    pass
