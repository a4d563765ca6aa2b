import logging

jar_logger = logging.getLogger("setcookie.jar")
internal_logger = logging.getLogger("setcookie.internal")
