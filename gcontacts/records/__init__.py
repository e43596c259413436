"""
gcontacts.records - Contact entries and their XML serialization

Import from the submodules directly (``gcontacts.records.contact``); the
package itself stays empty so the API client can load the template module
without pulling in the record class.
"""
