"""
Embedded region catalog: ISO 3166-1 alpha-2 codes and country names.

Used to recognise region suffixes on artist names ("Nirvana (UK)",
"Sugar - Sweden"). The catalog is static data; the lookup sets are built
once on first use and never modified afterwards.
"""

from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from rdstext.text.keys import name_key
from rdstext.text.lazy import LazyTable

# alpha-2 code → English short name
ISO_COUNTRIES: Dict[str, str] = {
    "AD": "Andorra", "AE": "United Arab Emirates", "AF": "Afghanistan",
    "AG": "Antigua and Barbuda", "AI": "Anguilla", "AL": "Albania",
    "AM": "Armenia", "AO": "Angola", "AQ": "Antarctica", "AR": "Argentina",
    "AS": "American Samoa", "AT": "Austria", "AU": "Australia", "AW": "Aruba",
    "AX": "Aland Islands", "AZ": "Azerbaijan", "BA": "Bosnia and Herzegovina",
    "BB": "Barbados", "BD": "Bangladesh", "BE": "Belgium", "BF": "Burkina Faso",
    "BG": "Bulgaria", "BH": "Bahrain", "BI": "Burundi", "BJ": "Benin",
    "BL": "Saint Barthelemy", "BM": "Bermuda", "BN": "Brunei", "BO": "Bolivia",
    "BQ": "Caribbean Netherlands", "BR": "Brazil", "BS": "Bahamas", "BT": "Bhutan",
    "BV": "Bouvet Island", "BW": "Botswana", "BY": "Belarus", "BZ": "Belize",
    "CA": "Canada", "CC": "Cocos Islands", "CD": "Congo", "CF": "Central African Republic",
    "CG": "Republic of the Congo", "CH": "Switzerland", "CI": "Ivory Coast",
    "CK": "Cook Islands", "CL": "Chile", "CM": "Cameroon", "CN": "China",
    "CO": "Colombia", "CR": "Costa Rica", "CU": "Cuba", "CV": "Cape Verde",
    "CW": "Curacao", "CX": "Christmas Island", "CY": "Cyprus", "CZ": "Czechia",
    "DE": "Germany", "DJ": "Djibouti", "DK": "Denmark", "DM": "Dominica",
    "DO": "Dominican Republic", "DZ": "Algeria", "EC": "Ecuador", "EE": "Estonia",
    "EG": "Egypt", "EH": "Western Sahara", "ER": "Eritrea", "ES": "Spain",
    "ET": "Ethiopia", "FI": "Finland", "FJ": "Fiji", "FK": "Falkland Islands",
    "FM": "Micronesia", "FO": "Faroe Islands", "FR": "France", "GA": "Gabon",
    "GB": "United Kingdom", "GD": "Grenada", "GE": "Georgia", "GF": "French Guiana",
    "GG": "Guernsey", "GH": "Ghana", "GI": "Gibraltar", "GL": "Greenland",
    "GM": "Gambia", "GN": "Guinea", "GP": "Guadeloupe", "GQ": "Equatorial Guinea",
    "GR": "Greece", "GS": "South Georgia", "GT": "Guatemala", "GU": "Guam",
    "GW": "Guinea-Bissau", "GY": "Guyana", "HK": "Hong Kong", "HM": "Heard Island",
    "HN": "Honduras", "HR": "Croatia", "HT": "Haiti", "HU": "Hungary",
    "ID": "Indonesia", "IE": "Ireland", "IL": "Israel", "IM": "Isle of Man",
    "IN": "India", "IO": "British Indian Ocean Territory", "IQ": "Iraq", "IR": "Iran",
    "IS": "Iceland", "IT": "Italy", "JE": "Jersey", "JM": "Jamaica", "JO": "Jordan",
    "JP": "Japan", "KE": "Kenya", "KG": "Kyrgyzstan", "KH": "Cambodia",
    "KI": "Kiribati", "KM": "Comoros", "KN": "Saint Kitts and Nevis",
    "KP": "North Korea", "KR": "South Korea", "KW": "Kuwait", "KY": "Cayman Islands",
    "KZ": "Kazakhstan", "LA": "Laos", "LB": "Lebanon", "LC": "Saint Lucia",
    "LI": "Liechtenstein", "LK": "Sri Lanka", "LR": "Liberia", "LS": "Lesotho",
    "LT": "Lithuania", "LU": "Luxembourg", "LV": "Latvia", "LY": "Libya",
    "MA": "Morocco", "MC": "Monaco", "MD": "Moldova", "ME": "Montenegro",
    "MF": "Saint Martin", "MG": "Madagascar", "MH": "Marshall Islands",
    "MK": "North Macedonia", "ML": "Mali", "MM": "Myanmar", "MN": "Mongolia",
    "MO": "Macao", "MP": "Northern Mariana Islands", "MQ": "Martinique",
    "MR": "Mauritania", "MS": "Montserrat", "MT": "Malta", "MU": "Mauritius",
    "MV": "Maldives", "MW": "Malawi", "MX": "Mexico", "MY": "Malaysia",
    "MZ": "Mozambique", "NA": "Namibia", "NC": "New Caledonia", "NE": "Niger",
    "NF": "Norfolk Island", "NG": "Nigeria", "NI": "Nicaragua", "NL": "Netherlands",
    "NO": "Norway", "NP": "Nepal", "NR": "Nauru", "NU": "Niue", "NZ": "New Zealand",
    "OM": "Oman", "PA": "Panama", "PE": "Peru", "PF": "French Polynesia",
    "PG": "Papua New Guinea", "PH": "Philippines", "PK": "Pakistan", "PL": "Poland",
    "PM": "Saint Pierre and Miquelon", "PN": "Pitcairn Islands", "PR": "Puerto Rico",
    "PS": "Palestine", "PT": "Portugal", "PW": "Palau", "PY": "Paraguay",
    "QA": "Qatar", "RE": "Reunion", "RO": "Romania", "RS": "Serbia", "RU": "Russia",
    "RW": "Rwanda", "SA": "Saudi Arabia", "SB": "Solomon Islands", "SC": "Seychelles",
    "SD": "Sudan", "SE": "Sweden", "SG": "Singapore", "SH": "Saint Helena",
    "SI": "Slovenia", "SJ": "Svalbard and Jan Mayen", "SK": "Slovakia",
    "SL": "Sierra Leone", "SM": "San Marino", "SN": "Senegal", "SO": "Somalia",
    "SR": "Suriname", "SS": "South Sudan", "ST": "Sao Tome and Principe",
    "SV": "El Salvador", "SX": "Sint Maarten", "SY": "Syria", "SZ": "Eswatini",
    "TC": "Turks and Caicos Islands", "TD": "Chad", "TF": "French Southern Territories",
    "TG": "Togo", "TH": "Thailand", "TJ": "Tajikistan", "TK": "Tokelau",
    "TL": "Timor-Leste", "TM": "Turkmenistan", "TN": "Tunisia", "TO": "Tonga",
    "TR": "Turkey", "TT": "Trinidad and Tobago", "TV": "Tuvalu", "TW": "Taiwan",
    "TZ": "Tanzania", "UA": "Ukraine", "UG": "Uganda",
    "UM": "United States Minor Outlying Islands", "US": "United States",
    "UY": "Uruguay", "UZ": "Uzbekistan", "VA": "Vatican City",
    "VC": "Saint Vincent and the Grenadines", "VE": "Venezuela",
    "VG": "British Virgin Islands", "VI": "US Virgin Islands", "VN": "Vietnam",
    "VU": "Vanuatu", "WF": "Wallis and Futuna", "WS": "Samoa", "YE": "Yemen",
    "YT": "Mayotte", "ZA": "South Africa", "ZM": "Zambia", "ZW": "Zimbabwe",
}

# Codes in common use that are not ISO alpha-2 assignments
EXTRA_CODES: Tuple[str, ...] = ("UK", "EU", "USA", "UAE", "USSR")

# Alternative and native names
NAME_ALIASES: Tuple[str, ...] = (
    "England", "Scotland", "Wales", "Northern Ireland", "Great Britain", "Britain",
    "America", "United States of America", "Holland", "The Netherlands",
    "Czech Republic", "Russian Federation", "Korea", "Republic of Korea",
    "Deutschland", "Nederland", "Belgique", "Belgie", "Espana", "Italia",
    "Sverige", "Norge", "Danmark", "Suomi", "Polska", "Osterreich", "Schweiz",
    "Suisse", "Svizzera", "Brasil", "Mexique", "Turkiye", "Hellas", "Ellada",
    "Magyarorszag", "Hrvatska", "Srbija", "Slovenija", "Slovensko", "Cesko",
    "Eesti", "Latvija", "Lietuva", "Eire", "Nippon", "Zhongguo",
    "Ivory Coast", "Cote d'Ivoire", "Burma", "Persia", "Soviet Union", "Yugoslavia",
    "Europe", "Africa", "Asia", "Latin America", "Scandinavia",
)


class RegionCatalog:
    """Read-only lookup of region codes and names."""

    def __init__(self, codes: FrozenSet[str], name_keys: FrozenSet[str]):
        self.codes = codes
        self.name_keys = name_keys

    @classmethod
    def from_tables(
        cls,
        countries: Dict[str, str],
        extra_codes: Iterable[str] = (),
        aliases: Iterable[str] = (),
    ) -> "RegionCatalog":
        codes = frozenset(list(countries) + [code.upper() for code in extra_codes])
        names = [name_key(name) for name in list(countries.values()) + list(aliases)]
        return cls(codes, frozenset(key for key in names if key))

    def is_code(self, text: str) -> bool:
        """Upper-case region code such as 'UK' or 'SE'; 'uk' does not match."""
        return text.isupper() and text in self.codes

    def is_name(self, text: str) -> bool:
        return name_key(text) in self.name_keys

    def match(self, text: str) -> Optional[str]:
        """Return the matched region text, or None when *text* is not a region."""
        candidate = text.strip().strip(".")
        if not candidate:
            return None
        if self.is_code(candidate.replace(".", "")) or self.is_name(candidate):
            return candidate
        return None


_DEFAULT = LazyTable(
    "region catalog",
    lambda: RegionCatalog.from_tables(ISO_COUNTRIES, EXTRA_CODES, NAME_ALIASES),
)


def default_catalog() -> RegionCatalog:
    """The embedded catalog, built on first use."""
    return _DEFAULT.get()
