from glob import glob

from setuptools import find_packages, setup

package_name = 'lex_node'

setup(
    name=package_name,
    version='0.1.0',
    packages=find_packages(include=[package_name, package_name + '.*']),
    data_files=[
        ('share/ament_index/resource_index/packages', ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
        ('share/' + package_name + '/launch', glob('launch/*.launch.py')),
        ('share/' + package_name + '/config', glob('config/*.yaml')),
    ],
    install_requires=['setuptools', 'boto3>=1.28,<2', 'botocore>=1.31,<2'],
    extras_require={'test': ['pytest']},
    zip_safe=True,
    maintainer='Psyched Maintainers',
    maintainer_email='pete@psyched.local',
    description='Conversation node bridging Amazon Lex turns onto a ROS 2 service.',
    license='Apache-2.0',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'lex_node = lex_node.node:main',
        ],
    },
)
