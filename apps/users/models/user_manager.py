from django.contrib.auth.models import BaseUserManager


class PortalUserManager(BaseUserManager):
    '''
    Manager for portal accounts; passwords are always stored hashed
    '''
    use_in_migrations = True

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError("Users must have a username")
        if not extra_fields.get("name"):
            raise ValueError("Users must have a name")

        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("name", username)
        return self.create_user(username, password, **extra_fields)
