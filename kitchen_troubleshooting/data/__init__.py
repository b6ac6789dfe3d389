from kitchen_troubleshooting.data.step_catalog import CATEGORY_DIAGNOSTICS, build_steps

__all__ = ["CATEGORY_DIAGNOSTICS", "build_steps"]
