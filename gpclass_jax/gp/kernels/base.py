# gpclass_jax/gp/kernels/base.py

_KERNEL_REGISTRY = {}

def register(name: str, fn):
    if name in _KERNEL_REGISTRY:
        raise KeyError(f"Kernel '{name}' already registered.")
    _KERNEL_REGISTRY[name] = fn

def get(name: str):
    try:
        return _KERNEL_REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown kernel '{name}'. "
            f"Available: {list(_KERNEL_REGISTRY.keys())}"
        )
