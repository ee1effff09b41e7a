from dataclasses import FrozenInstanceError
from unittest import TestCase

from recordkit.database.Exceptions import ConfigurationError, UnknownTable
from recordkit.database.Table import Table, TableRegistry


class TestTableRegistry(TestCase):
    def test_register_and_lookup(self):
        registry = TableRegistry()
        registry.register("Person", Table("people"))

        assert registry.lookup("Person") == Table("people", "id")
        assert registry.get_table("Person").primary_key == "id"
        assert "Person" in registry
        assert len(registry) == 1

    def test_unknown_type_raises(self):
        with self.assertRaises(UnknownTable):
            TableRegistry().lookup("Ghost")

    def test_empty_table_name_is_a_configuration_error(self):
        with self.assertRaises(ConfigurationError):
            TableRegistry().set_table("Person", Table(""))

    def test_table_is_immutable(self):
        table = Table("people", "person_id")
        with self.assertRaises(FrozenInstanceError):
            table.table_name = "humans"
