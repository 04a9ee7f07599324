"""Launch configuration for the Lex conversation node."""
import os

from ament_index_python.packages import get_package_share_directory
from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node


def _default_config_file() -> str:
    return os.path.join(get_package_share_directory("lex_node"), "config", "lex_config.yaml")


def generate_launch_description() -> LaunchDescription:
    """Return the launch description for the Lex node."""

    config_file = DeclareLaunchArgument("config_file", default_value=_default_config_file())
    node_name = DeclareLaunchArgument("node_name", default_value="lex_node")
    node = Node(
        package="lex_node",
        executable="lex_node",
        name=LaunchConfiguration("node_name"),
        output="screen",
        parameters=[LaunchConfiguration("config_file")],
    )
    return LaunchDescription([config_file, node_name, node])
