"""CLI命令行接口模块"""

import sys

import typer
from loguru import logger

from .cli_utils import get_config_manager, get_validation_manager, handle_registry_errors
from .managers.validation_manager import get_prev_docker_image_id

# 创建CLI应用
app = typer.Typer(
    help="Docker镜像体积校验工具",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich"
)


@app.command("validate")
@handle_registry_errors
def validate_image(
    image: str = typer.Argument(..., help="镜像全名，格式：仓库名:标签"),
    registry: str = typer.Option(None, "-r", "--registry", help="仓库REST API地址"),
    threshold: float = typer.Option(None, "-t", "--threshold", help="允许的最大增长百分比"),
    username: str = typer.Option(None, "-u", "--username", help="仓库用户名"),
    token: str = typer.Option(None, "-p", "--token", help="访问令牌，也可以是密码"),
    config_file: str = typer.Option(None, "-c", "--config", help="配置文件路径"),
):
    """校验镜像体积是否比上一版本增长过多"""
    config_manager = get_config_manager(config_file, registry, username, token, threshold)
    with get_validation_manager(config_manager) as validation_manager:
        failed = validation_manager.validate_image_size(
            image, config_manager.get_config()["validation"]["threshold"]
        )
    if failed:
        sys.exit(1)


@app.command("trend")
@handle_registry_errors
def show_trend(
    image: str = typer.Argument(..., help="镜像全名，格式：仓库名:标签"),
    registry: str = typer.Option(None, "-r", "--registry", help="仓库REST API地址"),
    username: str = typer.Option(None, "-u", "--username", help="仓库用户名"),
    token: str = typer.Option(None, "-p", "--token", help="访问令牌，也可以是密码"),
    config_file: str = typer.Option(None, "-c", "--config", help="配置文件路径"),
):
    """按推送时间输出仓库中镜像的体积趋势（CSV格式）"""
    config_manager = get_config_manager(config_file, registry, username, token)
    with get_validation_manager(config_manager) as validation_manager:
        validation_manager.print_image_size_trend(image)


@app.command("previous")
@handle_registry_errors
def show_previous(
    image: str = typer.Argument(..., help="镜像全名，格式：仓库名:标签"),
    lookup: bool = typer.Option(False, "-l", "--lookup", help="从仓库中查找，而不是根据标签推算"),
    target_os: str = typer.Option(None, "--os", help="目标操作系统，仅用于 --lookup"),
    os_version: str = typer.Option(None, "--os-version", help="操作系统版本，仅用于 --lookup"),
    registry: str = typer.Option(None, "-r", "--registry", help="仓库REST API地址"),
    username: str = typer.Option(None, "-u", "--username", help="仓库用户名"),
    token: str = typer.Option(None, "-p", "--token", help="访问令牌，也可以是密码"),
    config_file: str = typer.Option(None, "-c", "--config", help="配置文件路径"),
):
    """输出上一版本镜像"""
    if lookup:
        config_manager = get_config_manager(config_file, registry, username, token)
        target_os = target_os or config_manager.get_config()["validation"]["target_os"]
        with get_validation_manager(config_manager) as validation_manager:
            previous = validation_manager.find_previous_image(image, target_os, os_version)
    else:
        previous = get_prev_docker_image_id(image)

    if previous is None:
        logger.error(f"无法确定 {image} 的上一版本镜像")
        sys.exit(1)
    print(previous)


def main():
    """主入口函数"""
    app()


if __name__ == "__main__":
    main()
