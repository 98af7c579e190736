from django.apps import AppConfig


class ScreeningConfig(AppConfig):
    name = "screening"
    verbose_name = "Candidate screening agents"

    # Built on first use so startup never touches the database
    registry = None

    def get_registry(self):
        if self.registry is None:
            from screening.services.registry import AgentRegistry
            self.registry = AgentRegistry.from_settings()
        return self.registry
