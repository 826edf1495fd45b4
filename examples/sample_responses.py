"""
Sample XML-RPC documents

Canned request and response envelopes, as real servers send them, for
exercising the client without a network.
"""

QUOTE_REQUEST = b"""<?xml version="1.0"?>
<methodCall>
  <methodName>getQuote</methodName>
  <params>
    <param><value><string>IBM</string></value></param>
  </params>
</methodCall>
"""

QUOTE_RESPONSE = b"""<?xml version="1.0"?>
<methodResponse>
  <params>
    <param>
      <value>
        <struct>
          <member><name>symbol</name><value><string>IBM</string></value></member>
          <member><name>price</name><value><double>125.5</double></value></member>
          <member><name>volume</name><value><i4>31200</i4></value></member>
          <member><name>updated</name><value><dateTime.iso8601>20030401T120000</dateTime.iso8601></value></member>
        </struct>
      </value>
    </param>
  </params>
</methodResponse>
"""

BAD_SYMBOL_FAULT = b"""<?xml version="1.0"?>
<methodResponse>
  <fault>
    <value>
      <struct>
        <member><name>faultCode</name><value><int>7</int></value></member>
        <member><name>faultString</name><value><string>bad symbol</string></value></member>
      </struct>
    </value>
  </fault>
</methodResponse>
"""

# Some servers send a zero code, or none at all
ZERO_CODE_FAULT = b"""<?xml version="1.0"?>
<methodResponse>
  <fault>
    <value>
      <struct>
        <member><name>faultCode</name><value><int>0</int></value></member>
        <member><name>faultString</name><value>server exploded</value></member>
      </struct>
    </value>
  </fault>
</methodResponse>
"""

BARE_STRING_RESPONSE = b"""<?xml version="1.0"?>
<methodResponse>
  <params><param><value>Hello, World!</value></param></params>
</methodResponse>
"""

TYPED_STRING_RESPONSE = b"""<?xml version="1.0"?>
<methodResponse>
  <params><param><value><string>Hello, World!</string></value></param></params>
</methodResponse>
"""

ARRAY_RESPONSE = b"""<?xml version="1.0"?>
<methodResponse>
  <params>
    <param>
      <value>
        <array>
          <data>
            <value><int>1</int></value>
            <value>two</value>
            <value><boolean>1</boolean></value>
            <value><nil/></value>
            <value><base64>aGVsbG8=</base64></value>
          </data>
        </array>
      </value>
    </param>
  </params>
</methodResponse>
"""

TWO_PARAM_RESPONSE = b"""<?xml version="1.0"?>
<methodResponse>
  <params>
    <param><value><int>1</int></value></param>
    <param><value><int>2</int></value></param>
  </params>
</methodResponse>
"""

NO_PARAM_RESPONSE = b"""<?xml version="1.0"?>
<methodResponse>
  <params></params>
</methodResponse>
"""
