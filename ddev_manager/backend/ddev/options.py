"""
Enumerated ddev Options.

Values accepted by the create and config-update endpoints. Combinations
(e.g. whether a database version suits a project type) are left to ddev.
"""

PHP_VERSIONS: tuple[str, ...] = (
    "5.6", "7.0", "7.1", "7.2", "7.3", "7.4",
    "8.0", "8.1", "8.2", "8.3", "8.4",
)

DATABASES: tuple[str, ...] = (
    "mariadb:5.5", "mariadb:10.0", "mariadb:10.1", "mariadb:10.2", "mariadb:10.3",
    "mariadb:10.4", "mariadb:10.5", "mariadb:10.6", "mariadb:10.7", "mariadb:10.8",
    "mariadb:10.11", "mariadb:11.4",
    "mysql:5.5", "mysql:5.6", "mysql:5.7", "mysql:8.0",
    "postgres:9", "postgres:10", "postgres:11", "postgres:12", "postgres:13",
    "postgres:14", "postgres:15",
)

PROJECT_TYPES: tuple[str, ...] = (
    "backdrop", "cakephp", "craftcms", "drupal", "drupal6", "drupal7", "drupal8",
    "drupal9", "drupal10", "drupal11", "generic", "laravel", "magento", "magento2",
    "php", "shopware6", "silverstripe", "symfony", "typo3", "wordpress",
)

WEBSERVER_TYPES: tuple[str, ...] = ("nginx-fpm", "apache-fpm", "generic")

# Defaults shown in listings when config.yaml omits a field
DEFAULT_PHP_VERSION = "8.3"
DEFAULT_DATABASE = "mariadb:10.11"
DEFAULT_WEBSERVER_TYPE = "nginx-fpm"
DEFAULT_PROJECT_TYPE = "php"
DEFAULT_HTTP_PORT = 80
DEFAULT_HTTPS_PORT = 443

UNKNOWN = "Unknown"
