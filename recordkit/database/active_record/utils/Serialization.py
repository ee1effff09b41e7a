from datetime import date

from recordkit.utilities.DataKlass import DataKlass


class ActiveRecordUtilitiesSerialization:
    def to_dict(self) -> DataKlass:
        """
        Native values of every attribute, loading the record first unless it is new.
        Dates are rendered as ISO strings.
        """
        self._load_unless_new()
        data = {}

        for key, attribute in self._attributes.items():
            value = attribute.value
            if isinstance(value, date):
                data[key] = value.isoformat()
            else:
                data[key] = value

        return DataKlass(data)
