"""应用入口模块."""
