from .step_10_update_system import UpdateSystemStep
from .step_20_install_packages import InstallPackagesStep
from .step_30_secure_mysql import SecureMysqlStep
from .step_40_create_mysql_user import CreateMysqlPreviewUserStep
from .step_50_create_preview_user import CreatePreviewUserStep
from .step_60_create_directories import CreateDirectoriesStep
from .step_70_configure_nginx import ConfigureNginxStep
from .step_80_configure_php import ConfigurePhpStep
from .step_90_setup_ssl import SetupSslStep
from .step_100_configure_firewall import ConfigureFirewallStep
from .step_110_install_helper_scripts import InstallHelperScriptsStep

__all__ = [
    "UpdateSystemStep",
    "InstallPackagesStep",
    "SecureMysqlStep",
    "CreateMysqlPreviewUserStep",
    "CreatePreviewUserStep",
    "CreateDirectoriesStep",
    "ConfigureNginxStep",
    "ConfigurePhpStep",
    "SetupSslStep",
    "ConfigureFirewallStep",
    "InstallHelperScriptsStep",
]
