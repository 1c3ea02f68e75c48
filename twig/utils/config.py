# What it does: Manages all read/write operations for the `.git/config` file
# What data structure it uses: Map / Hash Table / Dictionary (the INI file format is a map of sections to key-value pairs, managed by Python's `configparser`)

import configparser
import os

from . import fs
from .errors import NotARepositoryError

DEFAULT_NAME = 'twig'
DEFAULT_EMAIL = 'twig@localhost'


def get_config_path(repo_root):  # Returns the path to the config file within the repository
    return os.path.join(repo_root, fs.CONTROL_DIR, 'config')


def read_config(repo_root): # Reads and returns the configuration as a ConfigParser object
    config = configparser.ConfigParser()
    config_path = get_config_path(repo_root)
    if os.path.exists(config_path):
        config.read(config_path)
    return config


def write_config(repo_root, key, value): # Sets a configuration key to a value and writes it to the config file
    if not os.path.isdir(os.path.join(repo_root, fs.CONTROL_DIR)):
        raise NotARepositoryError(repo_root)

    try:
        section, option = key.split('.', 1)
    except ValueError:
        raise ValueError("invalid key format, should be 'section.key'")

    config = read_config(repo_root)
    if not config.has_section(section):
        config.add_section(section)
    config.set(section, option, value)

    with open(get_config_path(repo_root), 'w') as configfile:
        config.write(configfile)


def get_user_config(repo_root): # Retrieves user.name and user.email from the config, or None if not set
    config = read_config(repo_root)
    return config.get('user', 'name', fallback=None), config.get('user', 'email', fallback=None)


def get_author(repo_root): # "Name <email>" from the config, then the environment, then a fixed default
    user_name, user_email = get_user_config(repo_root)
    user_name = user_name or os.environ.get('TWIG_AUTHOR_NAME') or DEFAULT_NAME
    user_email = user_email or os.environ.get('TWIG_AUTHOR_EMAIL') or DEFAULT_EMAIL
    return f"{user_name} <{user_email}>"
