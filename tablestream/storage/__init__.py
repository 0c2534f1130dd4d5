"""Sub-package for table storages; it holds no storage implementations yet."""